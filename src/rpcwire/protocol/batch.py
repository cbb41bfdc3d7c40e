"""Opt-in helpers for pairing batch replies with the requests that caused them.

Servers may answer a batch in any order, and notifications get no reply at
all. ``RPCClient.batch`` returns replies exactly as received; these helpers
match them up by id when the caller wants that.
"""

from collections.abc import Iterable, Sequence

from .messages import BatchEntry, Request, Response


def responses_by_id(responses: Iterable[Response]) -> dict[int, Response]:
    """Index responses by id.

    Responses with a null id (the server could not read the request's id)
    are skipped. If an id repeats, the first response wins.
    """
    indexed: dict[int, Response] = {}
    for response in responses:
        if response.id is not None and response.id not in indexed:
            indexed[response.id] = response
    return indexed


def match_responses(
    entries: Sequence[BatchEntry],
    responses: Iterable[Response],
) -> list[tuple[Request, Response | None]]:
    """Pair each Request in a batch with its response.

    Args:
        entries: The batch as sent (notifications are ignored)
        responses: Replies returned by ``batch()``

    Returns:
        One ``(request, response)`` tuple per Request, in batch order;
        ``response`` is None when the server sent nothing for that id
    """
    indexed = responses_by_id(responses)
    return [
        (entry, indexed.get(entry.id))
        for entry in entries
        if isinstance(entry, Request)
    ]
