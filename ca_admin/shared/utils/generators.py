"""Document id generation for auto-id creates."""

from cuid2 import cuid_wrapper

_next_id = cuid_wrapper()


def generate_cuid() -> str:
    """New CUID2 string.

    The id is chosen client-side, so it is known before the create is sent
    and the create can carry an exists=False precondition.
    """
    return str(_next_id())
