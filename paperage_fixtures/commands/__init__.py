"""
Shared option handling for the fixture commands.
"""

from pathlib import Path

from ..config import MatrixConfig, OverwritePolicy, SizeClass, default_tool_command, split_command


def add_matrix_options(parser) -> None:
    """Options describing the matrix and the tool, shared by all commands."""
    parser.add_argument("--tool", help="Tool command (default: $PAPERAGE_BIN or paper-age)")
    parser.add_argument(
        "--page-format", dest="page_formats", action="append", metavar="FORMAT",
        help="Page format to cover, repeatable (default: a4, letter)",
    )
    parser.add_argument(
        "--size", dest="sizes", action="append", metavar="NAME=BYTES",
        help="Size class, repeatable (default: small=6 medium=256 large=900)",
    )
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Output directory")
    parser.add_argument("--extension", default="pdf", help="Output file extension")
    parser.add_argument(
        "--overwrite", choices=[p.value for p in OverwritePolicy], default=OverwritePolicy.DELEGATE.value,
        help="Existing output files: leave to the tool, force, skip or fail (default: delegate)",
    )


def config_from_args(args) -> MatrixConfig:
    """
    Build a MatrixConfig from parsed arguments.

    Raises:
        ValueError: If any option is invalid (pydantic's ValidationError included)
    """
    options = {
        "tool_command": split_command(args.tool) if args.tool else default_tool_command(),
        "output_dir": args.output_dir,
        "extension": args.extension,
        "overwrite": OverwritePolicy(args.overwrite),
        "timeout": getattr(args, "timeout", None),
        "seed": getattr(args, "seed", None),
    }
    if args.page_formats:
        options["page_formats"] = args.page_formats
    if args.sizes:
        options["size_classes"] = [SizeClass.parse(s) for s in args.sizes]
    return MatrixConfig(**options)
