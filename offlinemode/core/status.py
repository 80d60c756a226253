"""Read-only connectivity flag shared with code outside the state machine."""


class NetworkStatus:
    """
    Mirror of the state machine's `online` decision.

    Other code can query it without engaging the state machine. Only the
    state machine publishes into it.
    """

    def __init__(self):
        self._online = False

    @property
    def online(self) -> bool:
        return self._online

    def _publish(self, online: bool):
        self._online = online


# Process-wide instance
network_status = NetworkStatus()


def is_network_online() -> bool:
    """Whether the network is online and the server reachable."""
    return network_status.online
