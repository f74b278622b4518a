from .config_loader import load_config
from .errors import LoaderError
from .fixture_loader import load_fixture, read_data_file
from .scenario_loader import ListenSpec, ScenarioFileSpec, ScenarioStep, load_scenario

__all__ = [
    "LoaderError",
    "ListenSpec",
    "ScenarioFileSpec",
    "ScenarioStep",
    "load_config",
    "load_fixture",
    "load_scenario",
    "read_data_file",
]
