from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Literal, TypedDict, Union
import json
import pathlib

import numpy as np

if TYPE_CHECKING:
    from ..core.state import RigState

# --- Configuration Types ---


class LogFrequencyEveryStep(TypedDict):
    type: Literal["every_step"]


class LogFrequencyTriggerStep(TypedDict):
    type: Literal["trigger_step"]  # Only steps on which a timer fired


class LogFrequencyInterval(TypedDict):
    type: Literal["interval"]
    value: int  # Interval in simulation steps


LogFrequencyConfig = Union[
    LogFrequencyEveryStep, LogFrequencyTriggerStep, LogFrequencyInterval
]


class BackendMemory(TypedDict):
    type: Literal["memory"]


class BackendNumpy(TypedDict):
    type: Literal["numpy"]
    filepath: str  # Path to save .npz file
    compress: bool  # Whether to use np.savez_compressed


class BackendJSON(TypedDict):
    type: Literal["json"]
    filepath: str  # Path to save .json file
    indent: int  # Indentation for pretty printing (0 for compact)


BackendConfig = Union[BackendMemory, BackendNumpy, BackendJSON]


class LoggerConfig(TypedDict):
    signals_to_log: List[str]  # RigState attribute names or env info keys
    log_frequency: LogFrequencyConfig
    backend: BackendConfig


def _plain(value: Any) -> Any:
    """Reduce enums and numpy scalars to values numpy/json can store."""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (np.integer, np.floating)):
        return value.item()
    return value


class SimulationLogger:
    """
    Records rig signals while the simulated rig runs.

    A signal is looked up on the controller's RigState first, then in the
    ``info`` dict returned by ``MiningRigEnv.step``.
    """

    def __init__(self, config: LoggerConfig):
        self.config = config

        self._validate_config()

        self.log_data: Dict[str, List[Any]] = defaultdict(list)
        self.step_counter = 0

        self.signal_accessors: Dict[str, Callable[[RigState, Dict[str, Any]], Any]] = {}
        self._prepare_signal_accessors()

    def _validate_config(self):
        if not self.config.get("signals_to_log"):
            raise ValueError(
                "LoggerConfig: 'signals_to_log' must be provided and non-empty."
            )
        if not self.config.get("log_frequency"):
            raise ValueError("LoggerConfig: 'log_frequency' must be provided.")
        if not self.config.get("backend"):
            raise ValueError("LoggerConfig: 'backend' must be provided.")

        frequency_type = self.config["log_frequency"]["type"]
        if frequency_type not in ["every_step", "trigger_step", "interval"]:
            raise ValueError(f"Unknown log frequency type '{frequency_type}'.")
        if frequency_type == "interval" and self.config["log_frequency"].get("value", 0) < 1:
            raise ValueError("LoggerConfig: 'interval' frequency needs a value >= 1.")

        backend_type = self.config["backend"]["type"]
        if backend_type not in ["memory", "numpy", "json"]:
            raise NotImplementedError(
                f"Backend type '{backend_type}' is not yet implemented."
            )

        if backend_type in ["numpy", "json"]:
            if "filepath" not in self.config["backend"]:
                raise ValueError(
                    f"LoggerConfig: 'filepath' must be provided for '{backend_type}' backend."
                )
            if not isinstance(self.config["backend"]["filepath"], str):
                raise ValueError(
                    f"LoggerConfig: 'filepath' for '{backend_type}' backend must be a string."
                )

        if backend_type == "numpy" and "compress" not in self.config["backend"]:
            self.config["backend"]["compress"] = False
        if backend_type == "json" and "indent" not in self.config["backend"]:
            self.config["backend"]["indent"] = 2

    def _prepare_signal_accessors(self):
        for signal_name in self.config["signals_to_log"]:
            self.signal_accessors[signal_name] = (
                lambda state, info, name=signal_name: getattr(state, name)
                if hasattr(state, name)
                else info.get(name)
            )

    def _should_log(self, info: Dict[str, Any]) -> bool:
        log_freq_conf = self.config["log_frequency"]
        if log_freq_conf["type"] == "every_step":
            return True
        if log_freq_conf["type"] == "trigger_step":
            return bool(info.get("trigger_step", False))
        return self.step_counter % log_freq_conf["value"] == 0

    def collect(self, state: RigState, info: Dict[str, Any] | None = None):
        """
        Collects data for the current simulation step if logging criteria are met.

        Args:
            state: The controller's RigState.
            info: Optional dictionary from env.step(), needed for 'trigger_step'
                frequency and for signals that are not RigState attributes.
        """
        info = info or {}
        self.step_counter += 1
        if not self._should_log(info):
            return

        for signal_name in self.config["signals_to_log"]:
            value = self.signal_accessors[signal_name](state, info)
            self.log_data[signal_name].append(_plain(value))

    def finalize(self):
        """
        Flushes data to disk for the file backends; nothing to do for memory.
        """
        backend_type = self.config["backend"]["type"]
        if backend_type == "json":
            self._finalize_json()
        elif backend_type == "numpy":
            self._finalize_numpy()

    def _finalize_numpy(self):
        filepath_str = self.config["backend"]["filepath"]
        should_compress = self.config["backend"].get("compress", False)

        if not self.log_data:
            print("No data collected, skipping .npz file creation.")
            return

        numpy_data = {
            signal_name: np.array(data_list)
            for signal_name, data_list in self.log_data.items()
        }

        output_path = pathlib.Path(filepath_str)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if should_compress:
            np.savez_compressed(output_path, **numpy_data)
        else:
            np.savez(output_path, **numpy_data)
        print(f"Logged data saved to {output_path}")

    def _finalize_json(self):
        filepath_str = self.config["backend"]["filepath"]
        indent = self.config["backend"].get("indent", 2)

        if not self.log_data:
            print("No data collected, skipping .json file creation.")
            return

        json_data = dict(self.log_data)

        output_path = pathlib.Path(filepath_str)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            if indent == 0:
                json.dump(json_data, f, separators=(",", ":"))  # Compact
            else:
                json.dump(json_data, f, indent=indent)
        print(f"Logged data saved to {output_path}")

    def get_data(self) -> Dict[str, List[Any]] | str | None:
        """
        Retrieves the logged data or its location.

        Returns:
            - A dictionary (signal -> list of values) if backend is "memory".
            - A string (filepath) if backend is "numpy" or "json".
        """
        if self.config["backend"]["type"] == "memory":
            return self.log_data
        return self.config["backend"].get("filepath")

    def reset(self):
        """
        Resets the logger's internal state for a new run.
        """
        self.log_data = defaultdict(list)
        self.step_counter = 0
