import json
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--save-to-json",
        action="store",
        nargs="?",
        const="layouts_json",
        help="Save layout statistics (regions, cells, rows, constraints) to JSON files in the specified directory",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: scalar multiplications with large windows")


@pytest.fixture
def save_to_json_folder(request):
    return request.config.getoption("--save-to-json")


@pytest.fixture
def save_layout(save_to_json_folder):
    """Return a function storing `cs.statistics()` under `test_name` in `data/<folder>/<area>/<filename>.json`."""

    def save(cs, area, filename, test_name):
        if not save_to_json_folder:
            return
        output_dir = Path("data") / save_to_json_folder / area
        output_dir.mkdir(parents=True, exist_ok=True)
        json_file = output_dir / f"{filename}.json"

        data = {}

        if json_file.exists():
            with json_file.open("r") as f:
                data = json.load(f)

        data[test_name] = cs.statistics()

        with json_file.open("w") as f:
            json.dump(data, f, indent=4)

    return save
