#!/usr/bin/env python3
"""
Configuration and settings management for morph-prep
"""

import copy
import json
import os
from typing import Dict, Any, Optional


class ConfigManager:
    """Manages configuration settings for the precompute pipelines"""

    DEFAULT_CONFIG_FILE = "morph_prep_config.json"

    def __init__(self, config_file: Optional[str] = None, verbose: bool = False):
        self.config_file = config_file or self.DEFAULT_CONFIG_FILE
        self.verbose = verbose
        self.config = self.load_default_config()
        self.load_config()

    def load_default_config(self) -> Dict[str, Any]:
        """Load default configuration settings"""
        return {
            # Mesh normalization
            "geometry": {
                "target_size": 3.0,
                "trim_fraction": 0.01,  # bottom 1% of the height range
                "max_vertex_count": 20000,
            },

            # Spatial grid correspondence
            "correspondence": {
                "grid_divisions": 20,
                "max_ring_radius": 2,
            },

            # Palette extraction
            "palette": {
                "color_count": 64,
                "sample_size": 20000,
                "random_state": 42,
                "image_extensions": [".jpg", ".jpeg"],
            },

            # File settings
            "files": {
                "model_dir": os.path.join("public", "models"),
                "output_dir": os.path.join("public", "precomputed"),
                "image_dir": os.path.join("public", "srefs"),
                "palette_output": os.path.join("public", "palettes.json"),
                "supported_formats": [".glb", ".gltf", ".obj", ".ply", ".stl", ".off", ".dae",
                                      ".pcd", ".xyz", ".pts", ".txt", ".csv"],
            },

            # Performance settings
            "performance": {
                "parallel_processing": False,
                "n_workers": os.cpu_count() or 1,
            },
        }

    def load_config(self) -> bool:
        """Load configuration from file"""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r') as f:
                    loaded_config = json.load(f)

                # Merge with defaults (preserve structure)
                self.merge_config(self.config, loaded_config)
                if self.verbose:
                    print(f"Configuration loaded from {self.config_file}")
                return True
            else:
                if self.verbose:
                    print(f"Configuration file not found: {self.config_file}")
                return False

        except (OSError, json.JSONDecodeError) as e:
            print(f"Error loading configuration: {e}")
            return False

    def save_config(self) -> bool:
        """Save configuration to file"""
        return self.export_config(self.config_file)

    def merge_config(self, default: Dict[str, Any], loaded: Dict[str, Any]) -> None:
        """Recursively merge loaded configuration with defaults"""
        for key, value in loaded.items():
            if key in default and isinstance(value, dict) and isinstance(default[key], dict):
                self.merge_config(default[key], value)
            else:
                default[key] = copy.deepcopy(value)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key_path: str, value: Any) -> bool:
        """Set configuration value using dot notation"""
        keys = key_path.split('.')
        config = self.config

        # Navigate to the parent of the target key
        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]
            if not isinstance(config, dict):
                print(f"Error setting configuration: {key_path} is not a section")
                return False

        config[keys[-1]] = value
        return True

    def get_geometry_params(self) -> Dict[str, Any]:
        """Get mesh normalization parameters"""
        return self.config["geometry"].copy()

    def set_geometry_params(self, params: Dict[str, Any]) -> None:
        self.config["geometry"].update(params)

    def get_correspondence_params(self) -> Dict[str, Any]:
        """Get correspondence parameters"""
        return self.config["correspondence"].copy()

    def set_correspondence_params(self, params: Dict[str, Any]) -> None:
        self.config["correspondence"].update(params)

    def get_palette_params(self) -> Dict[str, Any]:
        """Get palette extraction parameters"""
        return self.config["palette"].copy()

    def set_palette_params(self, params: Dict[str, Any]) -> None:
        self.config["palette"].update(params)

    def validate_config(self) -> bool:
        """Validate configuration values"""
        from ..utils.validation import validate_config
        is_valid, message = validate_config(self.config)
        if not is_valid and self.verbose:
            print(f"Invalid configuration: {message}")
        return is_valid

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults"""
        self.config = self.load_default_config()

    def export_config(self, filename: str) -> bool:
        """Export configuration to file"""
        try:
            # Create directory if it doesn't exist
            config_dir = os.path.dirname(filename)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)

            with open(filename, 'w') as f:
                json.dump(self.config, f, indent=2)
            return True
        except OSError as e:
            print(f"Error exporting configuration: {e}")
            return False

    def import_config(self, filename: str) -> bool:
        """Import configuration from file"""
        try:
            with open(filename, 'r') as f:
                imported_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Error importing configuration: {e}")
            return False

        if not self.validate_imported_config(imported_config):
            return False

        self.merge_config(self.config, imported_config)
        return True

    def validate_imported_config(self, config: Dict[str, Any]) -> bool:
        """Validate imported configuration structure"""
        known_sections = set(self.load_default_config())

        if not isinstance(config, dict):
            print("Configuration must be a JSON object")
            return False

        for section in config:
            if section not in known_sections:
                print(f"Unknown configuration section: {section}")
                return False

        return True

    def get_preset_config(self, preset_name: str) -> Optional[Dict[str, Any]]:
        """Get preset configuration"""
        presets = {
            "preview": {
                "geometry": {
                    "max_vertex_count": 5000,
                },
                "palette": {
                    "color_count": 16,
                    "sample_size": 5000,
                }
            },
            "balanced": {
                "geometry": {
                    "max_vertex_count": 20000,
                },
                "palette": {
                    "color_count": 64,
                }
            },
            "high_detail": {
                "geometry": {
                    "max_vertex_count": 60000,
                },
                "correspondence": {
                    "grid_divisions": 40,
                },
                "performance": {
                    "parallel_processing": True,
                }
            },
        }

        return presets.get(preset_name)

    def apply_preset(self, preset_name: str) -> bool:
        """Apply preset configuration"""
        preset = self.get_preset_config(preset_name)
        if preset:
            self.merge_config(self.config, preset)
            return True
        return False

    def get_config_summary(self) -> Dict[str, Any]:
        """Get configuration summary for display"""
        return {
            "geometry": {
                "target_size": self.config["geometry"]["target_size"],
                "trim_fraction": self.config["geometry"]["trim_fraction"],
                "max_vertices": self.config["geometry"]["max_vertex_count"],
            },
            "correspondence": {
                "grid_divisions": self.config["correspondence"]["grid_divisions"],
                "max_ring_radius": self.config["correspondence"]["max_ring_radius"],
            },
            "palette": {
                "colors": self.config["palette"]["color_count"],
            },
            "performance": {
                "parallel_processing": self.config["performance"]["parallel_processing"],
                "n_workers": self.config["performance"]["n_workers"],
            }
        }
