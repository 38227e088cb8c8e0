"""
btf-slice command line

    btf-slice <input-file> <light-index> <view-index>

Renders one light/view slice of a BTF dataset to ``output.tga`` in the
current directory. Exits with 0 on success and 1 on any failure, printing a
single diagnostic line to stderr.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import get_config_value, load_config
from .dataset import BTFLoadError, open_btf
from .logging_config import configure_logging, level_from_name
from .raster import build_raster
from .tga import TGAWriteError, save_tga

logger = logging.getLogger(__name__)

USAGE = "btf-slice <input-file> <light-index> <view-index>"


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors on one line and exits with 1."""

    def error(self, message):
        self.exit(1, f"usage: {USAGE}: {message}\n")


def _index(value: str) -> int:
    try:
        index = int(value, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid index: {value!r}")
    if index < 0:
        raise argparse.ArgumentTypeError(f"index must be non-negative: {value!r}")
    return index


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='btf-slice',
        usage=USAGE,
        add_help=False,
        description='Render one light/view slice of a BTF dataset to a TGA image'
    )
    parser.add_argument('input_file', help='BTF dataset (.npy or .npz)')
    parser.add_argument('light_index', type=_index, help='Illumination direction index')
    parser.add_argument('view_index', type=_index, help='Viewing direction index')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config()
    configure_logging(
        console=get_config_value(config, 'btfslice', 'logging', 'console', default=False),
        console_level=level_from_name(get_config_value(config, 'btfslice', 'logging', 'level', default='WARNING')),
        log_file=get_config_value(config, 'btfslice', 'logging', 'log_file'),
    )
    output_path = get_config_value(config, 'btfslice', 'output_path')

    try:
        with open_btf(args.input_file) as btf:
            with build_raster(
                btf,
                args.light_index,
                args.view_index,
                validate_indices=get_config_value(config, 'btfslice', 'validate_indices', default=True),
            ) as pixels:
                save_tga(
                    output_path,
                    btf.width,
                    btf.height,
                    pixels,
                    remove_partial=get_config_value(config, 'btfslice', 'remove_partial_output', default=True),
                )
    except BTFLoadError as e:
        print(f"Failed to load btf: {e}", file=sys.stderr)
        return 1
    except IndexError as e:
        print(f"Invalid slice for {args.input_file}: {e}", file=sys.stderr)
        return 1
    except TGAWriteError as e:
        print(f"Failed to save {output_path}: {e}", file=sys.stderr)
        return 1

    logger.info(f"Slice light={args.light_index} view={args.view_index} written to {output_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
