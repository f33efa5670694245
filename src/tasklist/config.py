"""Configuration defaults, env vars, and store wiring for tasklist."""

from __future__ import annotations

import os
from dataclasses import dataclass

import click

from tasklist.persistence import STORAGE_KEY, PersistenceAdapter
from tasklist.storage import FileSlotStore
from tasklist.store import TaskStore

APP_NAME = "tasklist"
HOME_ENV_VAR = "TASKLIST_HOME"


@dataclass
class Config:
    """Runtime configuration, filled from CLI flags with env/app-dir fallbacks."""

    # Storage
    store_dir: str = ""
    storage_key: str = STORAGE_KEY
    save_retries: int = 1

    # Behaviour
    seed_on_empty: bool = True

    # Misc
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.store_dir:
            self.store_dir = os.environ.get(HOME_ENV_VAR) or click.get_app_dir(APP_NAME)
        if self.save_retries < 0:
            self.save_retries = 0


def build_store(cfg: Config) -> TaskStore:
    """Wire file slots -> persistence -> store and load the saved tasks."""
    adapter = PersistenceAdapter(
        FileSlotStore(cfg.store_dir),
        key=cfg.storage_key,
        retries=cfg.save_retries,
    )
    store = TaskStore(adapter)
    store.load(seed_if_empty=cfg.seed_on_empty)
    return store
