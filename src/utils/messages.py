from textual.message import Message

from store.policy import Route


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    posted by the sidebar once the user confirmed logging out
    """

    bubble = True


class CartChangedMessage(Message):
    """
    Fired by a cart line widget after its quantity changed or it was removed.
    The cart screen recomputes the bill.
    """

    bubble = True


class NewOrderMessage(Message):
    """
    Fired at App level when an order is placed or paid.
    The app reloads the screen underneath the closing modal.
    """

    bubble = True


class NavigateMessage(Message):
    """
    Ask the app to go somewhere; the app authorizes the route first.
    """

    bubble = True

    def __init__(self, route: Route) -> None:
        super().__init__()
        self.route = route
