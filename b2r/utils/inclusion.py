"""Include-only / exclude selection of top-level Basecamp records."""

from collections.abc import Collection


def is_included(
    record_id: str,
    include_only: Collection[str] = (),
    exclude: Collection[str] = (),
) -> bool:
    """Decide whether a top-level record takes part in the import.

    An empty ``include_only`` admits everything; ``exclude`` always wins.

    Args:
        record_id: Basecamp id of the organization or project
        include_only: Ids to restrict the import to
        exclude: Ids to leave out

    Returns:
        True if the record should be imported

    """
    return (not include_only or record_id in include_only) and record_id not in exclude
