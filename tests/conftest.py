import logging

import pytest

from scanmap.logging_config import LOGGER_NAMESPACES
from scanmap.models import Coordinate, NetworkObservation, Node, ScanMap, VisibleNetwork


def scripted_input(lines):
    """Return a read_line callable answering prompts from ``lines`` in order."""
    answers = iter(lines)
    prompts = []

    def read_line(prompt):
        prompts.append(prompt)
        return next(answers)

    read_line.prompts = prompts
    return read_line


@pytest.fixture
def visible_networks():
    return [
        VisibleNetwork(mac="b1", ssid="Guest", channel="6", signal_level="-61.00"),
        VisibleNetwork(mac="a2", ssid="Office WiFi", channel="36", signal_level="-48.00"),
        VisibleNetwork(mac="c3", ssid="", channel="11", signal_level="-80.00"),
    ]


@pytest.fixture
def sample_map():
    return ScanMap(
        name="Office",
        notes="second floor, café side",
        nodes=[
            Node(
                position=Coordinate(0.0, 0.0, 1.2),
                notes="entrance",
                networks=[
                    NetworkObservation("00:11:22:33:44:55", "Office WiFi", "036", "-48.00", 1700000000000),
                    NetworkObservation("66:77:88:99:aa:bb", "Guest, 2.4GHz", "6", "-61", 1700000000000),
                ],
            ),
            Node(position=Coordinate(3.5, -2.25, 1.2), notes="", networks=[]),
            Node(
                position=Coordinate(7.0, 1.0, 0.0),
                notes="kitchen \"corner\"",
                networks=[
                    NetworkObservation("00:11:22:33:44:55", "Office WiFi", "036", "-70.00", 2 ** 100),
                ],
            ),
        ],
    )


@pytest.fixture
def scripted():
    return scripted_input


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by the CLI so later tests do not log to closed streams."""
    yield
    for namespace in LOGGER_NAMESPACES:
        logger = logging.getLogger(namespace)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
