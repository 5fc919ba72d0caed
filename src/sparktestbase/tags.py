from typing import Iterable, Tuple

import pytest

EXTENDED = 'sparktestbase.test.tags.extended'
LINUX_ONLY = 'sparktestbase.test.tags.linuxonly'

TAG_MARKER = 'tags'

Tags = Tuple[str, ...]


def with_tag(tags: Iterable[str], tag: str) -> Tags:
    """Returns `tags` with `tag` appended. The given tags are never dropped."""
    return (*tags, tag)


def linux_only(tags: Iterable[str] = ()) -> Tags:
    return with_tag(tags, LINUX_ONLY)


def tagged(*tags: str) -> pytest.MarkDecorator:
    """Marks a test (or a whole class) with tags. Stacking several `tagged` decorators adds up their tags."""
    return getattr(pytest.mark, TAG_MARKER)(*tags)


def item_tags(item: pytest.Item) -> Tags:
    """Collects the tags of a collected test.

    Suite tags declared through a `suite_tags` class attribute come first, followed by the tags of every
    `tags` marker on the test. Duplicates are dropped.
    """
    found = list(getattr(getattr(item, 'cls', None), 'suite_tags', ()))
    for marker in item.iter_markers(name=TAG_MARKER):
        found.extend(marker.args)
    return tuple(dict.fromkeys(found))
