"""
fontatlas.cli - pack BMFont fonts into a texture atlas

licence: https://opensource.org/licenses/MIT
"""

import argparse
import logging
from pathlib import Path

from .constants import VERSION
from .basetypes import Margins
from .sources import Sources
from .font import FontAsset
from .atlas import TextureAtlas
from .meta import AtlasMeta
from .packer import MAX_SIDE
from .scripting import wrap_main


def _margins(value):
    try:
        return Margins.create(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _positive(value):
    value = int(value)
    if value < 1:
        raise argparse.ArgumentTypeError(f'must be positive, not {value}')
    return value


def make_parser():
    parser = argparse.ArgumentParser(
        prog='fontatlas',
        description='Pack the glyphs of BMFont fonts into a single texture atlas.',
    )
    parser.add_argument('infiles', nargs='+', type=Path, help='BMFont .fnt descriptor files')
    parser.add_argument(
        '-o', '--output', type=Path, required=True,
        help='output path without extension; writes .png, .json and .bin files'
    )
    parser.add_argument(
        '--name', default=None,
        help='name of the atlas (default: output file name)'
    )
    parser.add_argument(
        '--padding', default=Margins(0, 0, 0, 0), type=_margins,
        help='pixels reserved around each sprite: one value, or top,bottom,left,right'
    )
    parser.add_argument(
        '--max-size', default=MAX_SIDE, type=_positive,
        help=f'maximum width and height of the atlas image (default: {MAX_SIDE})'
    )
    parser.add_argument(
        '--preview', default=None, metavar='TEXT',
        help='also draw TEXT in each font to a preview image'
    )
    parser.add_argument('--debug', action='store_true', help='enable debugging output')
    parser.add_argument('--version', action='version', version=f'fontatlas v{VERSION}')
    return parser


def build_atlas(
        infiles, output, *,
        name=None, padding=Margins(0, 0, 0, 0), max_side=MAX_SIDE, preview=None,
    ):
    """Load fonts, pack them and write image and metadata files."""
    output = Path(output)
    sources = Sources()
    atlas = TextureAtlas(padding, max_side)
    for infile in infiles:
        fnt_id = sources.load(infile)
        atlas.add_font(FontAsset.from_fnt(fnt_id, sources))
    atlas.load_sizes()
    atlas.pack()
    image = atlas.build_image(sources)
    output.parent.mkdir(parents=True, exist_ok=True)
    image_path = output.with_name(output.name + '.png')
    image.save(image_path, format='png')
    meta = AtlasMeta.from_atlas(atlas, name or output.name, image_path.name)
    output.with_name(output.name + '.json').write_text(meta.to_json(), encoding='utf-8')
    output.with_name(output.name + '.bin').write_bytes(meta.to_bytes())
    logging.info('Wrote atlas `%s` to %s.', meta.atlas_name, image_path)
    if preview:
        for index, font in enumerate(atlas.fonts):
            preview_path = output.with_name(f'{output.name}-preview-{index}.png')
            font.render_text(preview, sources).save(preview_path, format='png')
            logging.info("Wrote preview of '%s' to %s.", font.name, preview_path)
    return meta


def main(argv=None):
    args = make_parser().parse_args(argv)
    with wrap_main(args.debug):
        build_atlas(
            args.infiles, args.output,
            name=args.name, padding=args.padding, max_side=args.max_size,
            preview=args.preview,
        )


if __name__ == '__main__':
    main()
