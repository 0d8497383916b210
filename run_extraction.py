"""
Run the verification code extractor on a mailbox dump.

Reads:
  - mailbox_io/messages.json   (list of messages, or {"value": [...]} as
                                returned by the mail API)

Produces:
  - mailbox_io/extraction_result.json

Usage:
    python run_extraction.py [INPUT_JSON] [OUTPUT_JSON]
"""
import json
import logging
import sys
from pathlib import Path

from verification_codes.config import settings
from verification_codes.postprocessing.output_builder import validate_extraction_output
from verification_codes.postprocessing.pipeline import extract_with_report

# ---------------------------------------------------------------------------
# Setup logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("run_extraction")

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
ROOT = Path(__file__).parent
IO_DIR = ROOT / "mailbox_io"

MESSAGES_FILE = IO_DIR / "messages.json"
OUTPUT_FILE   = IO_DIR / "extraction_result.json"


def load_messages(path: Path) -> list:
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    # Mail APIs wrap message lists in {"value": [...]}
    if isinstance(payload, dict) and "value" in payload:
        payload = payload["value"]
    return payload


def print_summary(report: dict, output_file: Path) -> None:
    meta = report["processing_metadata"]

    print("\n" + "=" * 70)
    print("VERIFICATION CODE EXTRACTION — SUMMARY")
    print("=" * 70)
    print(f"profile     : {report['engine_version']['profile_name']}")
    print(f"patterns    : {report['engine_version']['patternsetversion']}")
    print(f"messages    : {meta['messages_processed']}/{meta['messages_received']} processed")
    print(f"candidates  : {meta['candidates_valid']}/{meta['candidates_found']} valid")

    results = report["results"]
    if results:
        print(f"\nLatest code : {results[0]['code']}")
        print(f"\nRanked codes ({len(results)}):")
        for r in results:
            print(
                f"  {r['code']:>8s}  score={r['score']:5.2f}  {r['priority']:6s}  "
                f"{r['received_at']}  {r['sender']} — {r['subject']}"
            )
    else:
        print("\nNo verification code found.")

    diag = report["diagnostics"]
    if diag.get("warnings"):
        print(f"\nWarning: {diag['warnings']}")

    print("=" * 70)
    print(f"Output: {output_file}")
    print("=" * 70 + "\n")


def main(argv: list) -> int:
    messages_file = Path(argv[1]) if len(argv) > 1 else MESSAGES_FILE
    output_file = Path(argv[2]) if len(argv) > 2 else OUTPUT_FILE

    logger.info("Loading messages from %s", messages_file)
    messages = load_messages(messages_file)
    logger.info("messages          : %d", len(messages) if isinstance(messages, list) else 0)

    report = extract_with_report(messages)
    logger.info("Extraction completed in %d ms", report["processing_metadata"]["extraction_duration_ms"])

    errors = validate_extraction_output(report)
    if errors:
        logger.error("Report is not schema-conformant: %s", errors)
        return 1

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(report, f, ensure_ascii=False, indent=2)
    logger.info("Output saved to: %s", output_file)

    print_summary(report, output_file)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
