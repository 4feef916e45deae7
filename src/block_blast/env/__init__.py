"""Gymnasium environments for Block Blast.

Importing this package registers ``BlockBlast-10x10-v0``.
"""

from __future__ import annotations

from gymnasium.envs.registration import register

from .block_blast_env import BlockBlastEnv
from .wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper

ENV_ID = "BlockBlast-10x10-v0"

register(
    id=ENV_ID,
    entry_point="block_blast.env.block_blast_env:BlockBlastEnv",
)

__all__ = ["ENV_ID", "BlockBlastEnv", "FlattenDiscreteActionWrapper", "ResampleInvalidActionWrapper"]
