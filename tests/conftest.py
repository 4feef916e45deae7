from __future__ import annotations

import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from block_blast.game import (  # noqa: E402
    BlockBlastGame,
    BlockSetDefinition,
    BlockSetRegistry,
    CustomBlockSetStore,
    GameConfig,
    HighScoreStore,
    MemoryStore,
    ShapeDefinition,
)


class FixedClock:
    def __init__(self, start: int = 1_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def custom_store(store: MemoryStore) -> CustomBlockSetStore:
    return CustomBlockSetStore(store, clock=FixedClock())


@pytest.fixture
def registry(custom_store: CustomBlockSetStore) -> BlockSetRegistry:
    return BlockSetRegistry(custom_store=custom_store)


@pytest.fixture
def mono_registry(custom_store: CustomBlockSetStore) -> BlockSetRegistry:
    mono = BlockSetDefinition(
        id="mono",
        name="Mono",
        description="Single cells only.",
        shapes=(ShapeDefinition.of([(0, 0)]),),
    )
    return BlockSetRegistry(definitions=(mono,), custom_store=custom_store, default_block_set_id="mono")


@pytest.fixture
def mono_game(mono_registry: BlockSetRegistry, store: MemoryStore) -> BlockBlastGame:
    return BlockBlastGame(
        registry=mono_registry,
        high_scores=HighScoreStore(store, default_block_set_id="mono"),
        config=GameConfig(block_set_id="mono", random_seed=7),
    )
