"""
CLI entry point

Repairs a saved model response, or a captured event stream, into a diagram document
"""
import sys
import argparse
from pathlib import Path

from diagram_repair.config import RepairConfig, ALT_DELIMITER
from diagram_repair.generation import generate_document, repair_document
from diagram_repair.io.sse_decoder import StreamError
from diagram_repair.logger import RepairLogger
from diagram_repair.repair.pipeline import MARKUP, ELEMENTS


def main():
    """Main function"""
    parser = argparse.ArgumentParser(
        description='Repair streamed or malformed model output into a diagram document',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  diagram-repair response.txt
  diagram-repair response.txt -m elements -o diagram.json
  diagram-repair capture.sse --stream -m elements
  diagram-repair capture.sse --stream --alt-delimiter
        """
    )
    parser.add_argument('input', type=str, help='Path to model output (or captured event stream with --stream)')
    parser.add_argument('-o', '--output', type=str, default=None,
                        help='Write the repaired document here instead of stdout')
    parser.add_argument('-m', '--mode', choices=[MARKUP, ELEMENTS], default=MARKUP,
                        help='Document kind: markup (XML tree) or elements (JSON array) (default: markup)')
    parser.add_argument('-s', '--stream', action='store_true',
                        help='Treat input as a captured event stream ("data: {...}" units)')
    parser.add_argument('--alt-delimiter', action='store_true',
                        help='Events are separated by a single newline instead of a blank line')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print each preview while decoding a stream')

    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Input file not found: {input_path}")
        sys.exit(1)

    try:
        config = RepairConfig()
        if args.alt_delimiter:
            config.event_delimiter = ALT_DELIMITER
        logger = RepairLogger()

        raw = input_path.read_bytes() if args.stream else input_path.read_text(encoding='utf-8')
        if args.stream:
            previews = []

            def on_preview(document: str):
                previews.append(document)
                if args.verbose:
                    print(f"--- preview {len(previews)} ({len(document)} chars)", file=sys.stderr)

            document = generate_document([raw], args.mode, on_preview=on_preview, config=config, logger=logger)
            logger.info(f"Decoded {len(previews)} content events")
        else:
            document = repair_document(raw, args.mode, config=config, logger=logger)

        if args.output:
            output_path = Path(args.output)
            output_path.write_text(document, encoding='utf-8')
            print(f"Saved {output_path}")
        else:
            print(document)

        # Display warnings (stdout carries the document when no output file is given)
        warnings = logger.get_warnings()
        if warnings and args.output:
            print(f"\nWarnings ({len(warnings)}):")
            for warning in warnings:
                print(f"  - {warning.message}")

    except StreamError as e:
        print(f"Stream error: {e.message}")
        print(f"  event: {e.raw_event}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
