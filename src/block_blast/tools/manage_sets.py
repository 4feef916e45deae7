from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from block_blast.game import (
    BlockBlastError,
    BlockSetRegistry,
    CustomBlockSetStore,
    JsonFileStore,
    describe_shape_rotations,
    parse_shape_blueprint,
    shape_to_blueprint,
)

logger = logging.getLogger(__name__)


def _read_blueprint(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, "r", encoding="utf-8") as f:
        return f.read()


def cmd_list(registry: BlockSetRegistry, args: argparse.Namespace) -> int:
    for summary in registry.built_in_summaries():
        print(f"{summary.id}\t{summary.name}\t{len(summary.preview_shapes)} shapes\t(built-in)")
    for record in registry.custom_store.list_sets():
        print(f"{record.id}\t{record.name}\t{len(record.shapes)} shapes")
    return 0


def cmd_create(registry: BlockSetRegistry, args: argparse.Namespace) -> int:
    record = registry.custom_store.create(args.name, args.description)
    print(record.id)
    return 0


def cmd_add_shape(registry: BlockSetRegistry, args: argparse.Namespace) -> int:
    record = registry.add_custom_shape(
        args.set_id,
        label=args.label,
        blueprint=_read_blueprint(args.blueprint),
        rotation_angles=args.angles,
    )
    shape = record.shapes[-1]
    print(f"Added {shape.label} ({shape.id}) with angles {shape.rotation_angles}")
    print(shape.blueprint)
    return 0


def cmd_describe(registry: BlockSetRegistry, args: argparse.Namespace) -> int:
    parsed = parse_shape_blueprint(_read_blueprint(args.blueprint))
    for descriptor in describe_shape_rotations(parsed.coordinates):
        if descriptor.is_duplicate_of_base:
            note = "same as 0"
        elif descriptor.is_redundant:
            note = "redundant"
        else:
            note = "distinct"
        print(f"{descriptor.angle:>3}: {note}")
        print(shape_to_blueprint(descriptor.coordinates))
    return 0


def cmd_import(registry: BlockSetRegistry, args: argparse.Namespace) -> int:
    result = registry.import_shapes(args.source_id, args.target_id)
    if result.added == 0 and result.skipped == 0:
        print("Selected block set has no shapes to import.")
    elif result.added == 0:
        print("All shapes from that block set already exist here.")
    elif result.skipped:
        print(f"Imported {result.added} shapes (skipped {result.skipped} duplicates).")
    else:
        print(f"Imported {result.added} shapes.")
    return 0


def cmd_delete(registry: BlockSetRegistry, args: argparse.Namespace) -> int:
    if registry.custom_store.delete(args.set_id):
        print(f"Deleted {args.set_id}")
        return 0
    print(f"No custom block set {args.set_id}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Manage custom Block Blast block sets")
    p.add_argument("--store", default=os.path.join(os.path.expanduser("~"), ".block_blast.json"))
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list").set_defaults(func=cmd_list)

    create = sub.add_parser("create")
    create.add_argument("name")
    create.add_argument("--description", default="")
    create.set_defaults(func=cmd_create)

    add = sub.add_parser("add-shape", help="add a shape from a blueprint file ('-' for stdin)")
    add.add_argument("set_id")
    add.add_argument("blueprint")
    add.add_argument("--label", default=None)
    add.add_argument("--angles", type=int, nargs="+", default=[0])
    add.set_defaults(func=cmd_add_shape)

    describe = sub.add_parser("describe", help="show which rotations of a blueprint are distinct")
    describe.add_argument("blueprint")
    describe.set_defaults(func=cmd_describe)

    imp = sub.add_parser("import")
    imp.add_argument("source_id")
    imp.add_argument("target_id")
    imp.set_defaults(func=cmd_import)

    delete = sub.add_parser("delete")
    delete.add_argument("set_id")
    delete.set_defaults(func=cmd_delete)
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    registry = BlockSetRegistry(custom_store=CustomBlockSetStore(JsonFileStore(args.store)))
    try:
        return args.func(registry, args)
    except (BlockBlastError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
