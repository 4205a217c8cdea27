#!/usr/bin/env python3
"""
PCX Image Decoder CLI

Usage:
    python decode.py --input <path> --output <path>

Example:
    python decode.py --input picture.pcx --output picture.png
"""

import argparse
import logging
import sys
import os
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from pcxcodec.io import write_image, describe_header
from pcxcodec.codec import PcxDecoder
from pcxcodec.errors import PcxDecodeError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='PCX Image Decoder - Decode 24-bit PCX images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Decode to PNG
  python decode.py --input picture.pcx --output picture.png

  # Print the header only
  python decode.py --input picture.pcx --info

  # Decode on a worker thread with progress output
  python decode.py --input picture.pcx --output picture.npy --detached --verbose
        """
    )

    # Required arguments
    parser.add_argument('--input', '-i', required=True,
                        help='Input PCX file path')
    parser.add_argument('--output', '-o',
                        help='Output image path (.png, .npy or .raw)')

    # Optional arguments
    parser.add_argument('--format', '-f', choices=['png', 'npy', 'raw'], default=None,
                        help='Output format (default: from output extension)')
    parser.add_argument('--detached', action='store_true',
                        help='Decode on a worker thread')
    parser.add_argument('--info', action='store_true',
                        help='Print header information and exit')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.info and not args.output:
        parser.error('--output is required unless --info is given')

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    # Check input file exists
    if not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        with open(args.input, 'rb') as f:
            decoder = PcxDecoder(f)
            header = decoder.parse_header()

            if args.info or args.verbose:
                print(f"Header of {args.input}:")
                for key, value in describe_header(header).items():
                    print(f"  {key}: {value}")
            if args.info:
                return 0

            if not decoder.is_pcx_file:
                print(f"Warning: {args.input} does not carry the PCX identifier byte",
                      file=sys.stderr)

            if args.verbose:
                @decoder.subscribe
                def report(event):
                    if event.progress % 10 == 0:
                        print(f"  Progress: {event.progress}%")

            start_time = time.time()

            if args.detached:
                image = decoder.decode_detached().join()
            else:
                image = decoder.decode_blocking()

            elapsed = time.time() - start_time

        path = write_image(image, args.output, format=args.format)

        if args.verbose:
            print(f"  Decoding time: {elapsed:.2f}s")
            print(f"\nOutput written to: {path}")
        else:
            print(f"Decoded: {args.input} -> {path} "
                  f"({header.width}x{header.height})")

    except PcxDecodeError as e:
        print(f"Error: Invalid PCX file - {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
