#!/usr/bin/env python3
"""
X12 Codec Command Line Tool

Decodes an X12 EDI file, checks its envelope and writes the document tree as JSON.

Usage:
    python main.py input.edi                               # Decode input.edi to input.json
    python main.py input.edi output.json                   # Decode to specific output file
    python main.py input.edi --reencode copy.edi           # Also marshal the tree back to X12
    python main.py input.edi --relaxed --detect-delimiters # Lenient decoding
"""

import argparse
import logging
import sys
from pathlib import Path

# Try importing from installed package first, fallback to src path
try:
    from x12_config import DecoderConfig
    from x12_decoder import EnvelopeDecoder
    from x12_errors import X12Error
    from x12_marshaller import Marshaller
    from x12_validator import validate
except ImportError:
    # Add src to path for imports when not installed
    sys.path.insert(0, str(Path(__file__).parent / "src"))
    from x12_config import DecoderConfig
    from x12_decoder import EnvelopeDecoder
    from x12_errors import X12Error
    from x12_marshaller import Marshaller
    from x12_validator import validate

logger = logging.getLogger("x12")


def process_file(args: argparse.Namespace) -> int:
    """Decode, validate and convert an X12 file."""

    print(f"X12 Codec - Processing {args.input_file}")
    print("=" * 50)

    config = DecoderConfig(
        relaxed_segment_id_whitespace=args.relaxed,
        detect_delimiters=args.detect_delimiters,
    )

    try:
        with open(args.input_file, 'rb') as f:
            decoder = EnvelopeDecoder(config)
            document = decoder.decode(f)
        print("X12 decoded successfully!")

        interchange = document.interchange
        print(f"\nDecoding Results:")
        if interchange.header is not None:
            print(f"  Interchange Control Number: {interchange.header.interchange_control_number}")
            print(f"  Sender ID: {interchange.header.interchange_sender_id.strip()}")
            print(f"  Receiver ID: {interchange.header.interchange_receiver_id.strip()}")
        print(f"  Envelope Automatically Added: {document.envelope_automatically_added}")
        print(f"  Functional Groups: {len(interchange.function_groups)}")
        for fg in interchange.function_groups:
            print(f"    Transaction Sets: {len(fg.transactions)}")
            for txn in fg.transactions:
                print(f"      Segments: {len(txn.segments)}")

        print("\nChecking envelope...")
        try:
            validate(document)
            print("Envelope is valid!")
        except X12Error as e:
            print(f"Envelope check failed: {e}")

        json_output = document.model_dump_json(indent=2)
        with open(args.output_file, 'w', encoding='utf-8') as f:
            f.write(json_output)
        print(f"\nJSON output saved to: {args.output_file}")
        print(f"Output size: {len(json_output):,} characters")

        if args.reencode:
            marshaller = Marshaller(
                segment_separator=decoder.delimiters.segment,
                element_separator=decoder.delimiters.element,
                sub_element_separator=decoder.delimiters.sub_element,
                new_lines=args.new_lines,
                encoding=config.encoding,
            )
            with open(args.reencode, 'wb') as f:
                f.write(marshaller.marshal(document))
            print(f"Re-encoded X12 saved to: {args.reencode}")

        return 0

    except FileNotFoundError as e:
        print(f"Error: File not found: {e}")
        return 1
    except X12Error as e:
        print(f"Error during X12 processing: {e}")
        logger.debug("Decoding failed", exc_info=True)
        return 1


def main():
    """Main entry point with command line argument parsing."""

    parser = argparse.ArgumentParser(
        description="Decode X12 EDI files to JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py claims.edi                            # Decode claims.edi -> claims.json
  python main.py claims.edi output.json                # Decode to specific output
  python main.py claims.edi --reencode copy.edi        # Round trip back to X12
        """
    )

    parser.add_argument('input_file', help='Input X12 file')
    parser.add_argument('output_file', nargs='?',
                       help='Output JSON file (default: input_file.json)')
    parser.add_argument('--relaxed', action='store_true',
                       help='Ignore whitespace around segment ids')
    parser.add_argument('--detect-delimiters', action='store_true',
                       help='Use the delimiters declared in the ISA segment')
    parser.add_argument('--reencode', metavar='FILE',
                       help='Also marshal the decoded document back to X12')
    parser.add_argument('--new-lines', action='store_true',
                       help='Put every re-encoded segment on its own line')
    parser.add_argument('--log-level', default='WARNING',
                       help='Logging level (default: WARNING)')

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s",
        stream=sys.stderr,
    )

    if not args.output_file:
        args.output_file = str(Path(args.input_file).with_suffix('.json'))

    if not Path(args.input_file).exists():
        print(f"Error: Input file not found: {args.input_file}")
        return 1

    return process_file(args)


if __name__ == "__main__":
    exit(main())
