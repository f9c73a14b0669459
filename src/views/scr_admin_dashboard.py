import asyncio

from textual import on, work
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Button, Label, MarkdownViewer, Sparkline

import api.crud as crud
from store import policy
from utils.analytics import (
    dashboard_metrics,
    orders_by_status,
    recent_payments,
    revenue_by_day,
    top_products,
)
from utils.presentation import badge
from utils.pure import format_money, generate_markdown_table, pretty_date
from views.base_screen import BaseScreen


def _section(title, headers, rows, aligns, empty_text) -> str:
    if not rows:
        return f"### {title}\n\n_{empty_text}_"
    return f"### {title}\n\n" + generate_markdown_table(headers, rows, aligns)


class AdminDashboardScreen(BaseScreen):
    """
    Store overview: headline metrics, orders by status, revenue over the last
    two weeks, best sellers and the latest payments.
    """

    ROUTE = policy.ADMIN_DASHBOARD
    TITLE_TEXT = "Dashboard"

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll():
            yield Label("Revenue, last 14 days", id="label-revenue")
            yield Sparkline([], summary_function=max, id="spark-revenue")
            yield MarkdownViewer(id="md-dashboard", show_table_of_contents=False)
            yield Button("Refresh", id="btn-refresh")

    def reload(self) -> None:
        self.handle_reload()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True)
    async def handle_reload(self) -> None:
        gw = self.app.state.gateway
        results = await asyncio.gather(
            crud.list_orders(gw),
            crud.list_products(gw),
            crud.list_users(gw),
            crud.list_payments(gw),
        )
        if not all(r.success for r in results):
            self.notify("Failed to load admin dashboard", severity="error")
            return
        orders, products, users, payments = (r.data for r in results)

        metrics = dashboard_metrics(orders, products, users)
        revenue = revenue_by_day(orders)

        self.query_one(Sparkline).data = [float(v) for _, v in revenue]
        peak_day, peak = max(revenue, key=lambda d: d[1])
        self.query_one("#label-revenue", Label).update(
            f"Revenue, last 14 days (best: {format_money(peak)} on {peak_day:%d %b})"
            if peak
            else "Revenue, last 14 days (no orders yet)"
        )

        metrics_md = generate_markdown_table(
            ["Total Revenue", "Orders", "Users", "Products"],
            [
                [
                    format_money(metrics.total_revenue),
                    metrics.total_orders,
                    metrics.total_users,
                    metrics.total_products,
                ]
            ],
            ["c", "c", "c", "c"],
        )
        status_md = _section(
            "Orders by Status",
            ["Status", "Orders"],
            [[badge(s).label, n] for s, n in orders_by_status(orders).items()],
            ["l", "r"],
            "No orders yet.",
        )
        top_md = _section(
            "Top Products",
            ["Product", "Qty Sold"],
            [[p.name, p.quantity] for p in top_products(orders)],
            ["l", "r"],
            "Nothing sold yet.",
        )
        payments_md = _section(
            "Recent Payments",
            ["Payment", "Order", "Amount", "Status", "Date"],
            [
                [p.id, p.order_id, format_money(p.amount), badge(p.status).label, pretty_date(p.created_at)]
                for p in recent_payments(payments)
            ],
            ["l", "l", "r", "l", "l"],
            "No payments yet.",
        )

        md = "\n\n".join(
            ["### Overview", metrics_md, status_md, top_md, payments_md]
        )
        await self.query_one("#md-dashboard", MarkdownViewer).document.update(md)
