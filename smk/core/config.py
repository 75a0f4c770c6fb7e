"""Configuration for Smk.

Settings are read-only INI files: the repository's .smk/config and the
user's ~/.smkconfig. The core reads two things from them, the author
identity stamped on commits and the protected default branch.
"""

import os
import configparser
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

DEFAULT_AUTHOR_NAME = 'Local User'
DEFAULT_AUTHOR_EMAIL = 'local@smk'
DEFAULT_BRANCH = 'master'


def _load_ini(path: Optional[Path]) -> Optional[configparser.ConfigParser]:
    if path is None:
        return None
    parser = configparser.ConfigParser()
    if path.is_file():
        parser.read(path)
    return parser


class Config:
    """
    Layered Smk settings.

    Lookup order, first match wins:
    - environment variable SMK_<SECTION>_<KEY>
    - repository config (.smk/config)
    - global config (~/.smkconfig)
    """

    GLOBAL_CONFIG_PATH = Path.home() / '.smkconfig'

    def __init__(self, repo_config_path: Optional[Path] = None):
        """
        Args:
            repo_config_path: The repository's config file, or None outside a repository
        """
        self.repo_config_path = repo_config_path
        self._layers: Optional[List[configparser.ConfigParser]] = None

    def layers(self) -> Iterator[configparser.ConfigParser]:
        """Parsed config files, highest priority first. Files are read once."""
        if self._layers is None:
            candidates = (_load_ini(self.repo_config_path), _load_ini(self.GLOBAL_CONFIG_PATH))
            self._layers = [parser for parser in candidates if parser is not None]
        return iter(self._layers)

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        Look up section.key across the environment and config files.

        Returns:
            The first value found, or fallback
        """
        env_value = os.environ.get(f"SMK_{section.upper()}_{key.upper()}")
        if env_value is not None:
            return env_value

        for parser in self.layers():
            if parser.has_option(section, key):
                return parser.get(section, key)
        return fallback

    def get_user_identity(self) -> Tuple[str, str]:
        """(name, email) for commits, defaulting to the local user identity."""
        name = self.get('user', 'name') or DEFAULT_AUTHOR_NAME
        email = self.get('user', 'email') or DEFAULT_AUTHOR_EMAIL
        return name, email

    def author(self) -> str:
        """Author string in "Name <email>" form."""
        name, email = self.get_user_identity()
        return f"{name} <{email}>"

    def default_branch(self) -> str:
        """The branch created by init, which can never be deleted."""
        return self.get('core', 'defaultbranch') or DEFAULT_BRANCH


def get_config(repo=None) -> Config:
    """
    Get a Config instance.

    Args:
        repo: Repository instance, or None for global-only config

    Returns:
        Config instance
    """
    if repo:
        return Config(repo.config_file)
    return Config()
