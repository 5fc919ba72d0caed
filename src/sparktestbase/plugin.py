"""pytest plugin selecting tests by the tags attached with `sparktestbase.tags`."""

from typing import List

import pytest

from sparktestbase.tags import TAG_MARKER, item_tags


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup('sparktestbase')
    group.addoption(
        '--include-tag',
        action='append',
        default=[],
        metavar='TAG',
        help='Only run tests carrying TAG. May be given several times.',
    )
    group.addoption(
        '--exclude-tag',
        action='append',
        default=[],
        metavar='TAG',
        help='Skip tests carrying TAG. May be given several times.',
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line('markers', f'{TAG_MARKER}(*names): labels used by --include-tag/--exclude-tag')


def pytest_collection_modifyitems(config: pytest.Config, items: List[pytest.Item]) -> None:
    include = set(config.getoption('--include-tag'))
    exclude = set(config.getoption('--exclude-tag'))
    if not include and not exclude:
        return

    selected, deselected = [], []
    for item in items:
        tags = set(item_tags(item))
        if (include and not tags & include) or tags & exclude:
            deselected.append(item)
        else:
            selected.append(item)

    if deselected:
        config.hook.pytest_deselected(items=deselected)
        items[:] = selected
