"""Settings parser use case."""

import yaml

from replicaset.domain.exceptions import SettingsError
from replicaset.domain.settings import ReplicaSetSettings


class SettingsParser:
    """Parses controller YAML configuration to settings.

    Expected layout::

        replicaset:
          initiate_status_attempts: 50
          ready_poll_interval: 1.0

    Every key is optional; omitted keys keep their defaults.
    """

    def parse(self, yaml_str: str) -> ReplicaSetSettings:
        """Parse YAML config to settings.

        Args:
            yaml_str: YAML string with a top-level ``replicaset`` mapping.

        Returns:
            ReplicaSetSettings domain object

        Raises:
            SettingsError: If YAML is invalid, has the wrong shape, or
                contains unknown keys.
        """
        try:
            config = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML: {e}") from e

        if not isinstance(config, dict):
            raise SettingsError("Config must be a dictionary")

        section = config.get("replicaset")
        if section is None:
            return ReplicaSetSettings()

        if not isinstance(section, dict):
            raise SettingsError("replicaset section must be a dictionary")

        unknown = sorted(set(section) - ReplicaSetSettings.field_names())
        if unknown:
            raise SettingsError(f"Unknown settings: {', '.join(map(str, unknown))}")

        return ReplicaSetSettings(**section)
