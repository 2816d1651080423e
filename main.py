"""
Main entry point: encode a JSON payload plus attachments as a multipart form
and submit it, or save the body to disk.
"""
import json
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Dict, List, Tuple

from tqdm import tqdm

import config
from client.form_client import FormClient
from encoder.form_encoder import encode

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(config.LOG_FILE),
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def parse_attachments(value: str) -> List[Tuple[str, Path]]:
    """
    Parse "field=path" pairs separated by commas.

    A bare path is attached under the file's own name.
    """
    attachments = []
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        field, sep, path = entry.partition("=")
        if not sep:
            field, path = "", field
        attachments.append((field.strip(), Path(path.strip())))
    return attachments


def load_payload(path: Path) -> Dict[str, Any]:
    """Load the JSON object whose keys become form fields."""
    if not path.exists():
        logger.warning(f"Payload file not found at {path}, sending attachments only")
        return {}
    with open(path, 'r', encoding='utf-8') as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"Payload in {path} must be a JSON object")
    return payload


def save_body(body: bytes, content_type: str, output_file: Path):
    """Write the body and its content type next to each other."""
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_bytes(body)
    output_file.with_suffix(output_file.suffix + ".content-type").write_text(content_type, encoding='utf-8')
    logger.info(f"Output file: {output_file}")


def main():
    """Main execution function."""
    logger.info("=" * 60)
    logger.info("Multipart Form Encoder")
    logger.info("=" * 60)

    try:
        payload = load_payload(config.PAYLOAD_FILE)
        attachments = parse_attachments(config.ATTACHMENTS)
        logger.info(f"Fields: {len(payload)}, attachments: {len(attachments)}")

        with ExitStack() as stack:
            for field, path in attachments:
                f = stack.enter_context(open(path, 'rb'))
                if config.SHOW_PROGRESS:
                    f = stack.enter_context(
                        tqdm.wrapattr(f, "read", total=path.stat().st_size, desc=f"Encoding {path.name}")
                    )
                payload[field or path.name] = f

            body, content_type = encode(payload)

        logger.info(f"Encoded {len(body)} bytes")

        if config.FORM_ENDPOINT_URL:
            client = FormClient()
            response = client.post_body("", body, content_type)
            logger.info(f"Endpoint replied with status {response.status_code}")
        else:
            save_body(body, content_type, config.OUTPUT_FILE)

        logger.info("=" * 60)
        logger.info("Pipeline completed successfully!")
        logger.info("=" * 60)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Pipeline failed with error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
