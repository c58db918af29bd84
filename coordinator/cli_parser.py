import argparse
import os
import sys
from typing import Optional

from coordinator.constants import (
    POT_DOWNLOAD_URL_TEMPLATE,
    STORAGE_ACCESS_KEY_ENV,
    STORAGE_SECRET_KEY_ENV,
)

SHOW_HELP = False

# Intercept --help/-h flags before importing bittensor since it overrides help behavior
# This allows showing our custom help message instead of bittensor's default one
if "--help" in sys.argv:
    SHOW_HELP = True
    sys.argv.remove("--help")
elif "-h" in sys.argv:
    SHOW_HELP = True
    sys.argv.remove("-h")

# flake8: noqa
import bittensor as bt

parser: Optional[argparse.ArgumentParser] = None
config: Optional[bt.config] = None


DESCRIPTION = (
    "Phase 2 ceremony setup. Assembles a Groth16 trusted setup ceremony from the "
    "R1CS files of the working directory, stages its artifacts to storage and "
    "registers it with the coordination backend."
)


def init_config(args: Optional[list[str]] = None):
    """
    Initialize the configuration for the setup run.
    The configuration itself is stored in the global variable `config`.
    """
    global parser
    global config

    parser = argparse.ArgumentParser(
        description=DESCRIPTION,
        allow_abbrev=False,
    )

    parser.add_argument(
        "--working-dir",
        type=str,
        default=os.getcwd(),
        help="Directory containing the .r1cs file of each circuit (default: cwd).",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for setup outputs (default: <working-dir>/.phase2cli).",
    )
    parser.add_argument(
        "--pot-cache-dir",
        type=str,
        default=os.getenv("PHASE2_POT_CACHE_DIR"),
        help="Persistent Powers of Tau cache (default: <output-dir>/setup/pot).",
    )
    parser.add_argument(
        "--pot-download-url",
        type=str,
        default=POT_DOWNLOAD_URL_TEMPLATE,
        help="Base URL the Powers of Tau files are downloaded from.",
    )
    parser.add_argument(
        "--registration-url",
        type=str,
        default=os.getenv("PHASE2_REGISTRATION_URL", ""),
        help="Endpoint of the ceremony registration service.",
    )
    parser.add_argument(
        "--template",
        type=str,
        default=None,
        help="JSON or TOML file answering the ceremony and circuit questions.",
    )
    parser.add_argument(
        "--yes",
        default=False,
        action="store_true",
        help="Create the ceremony without asking for confirmation.",
    )
    parser.add_argument(
        "--no-wallet",
        default=False,
        action="store_true",
        help="Do not sign the registration request with the wallet hotkey.",
    )
    parser.add_argument(
        "--skip-preflight",
        default=bool(os.getenv("PHASE2_SKIP_PREFLIGHT", False)),
        action="store_true",
        help="Skip the Node.js and snarkjs installation checks.",
    )
    parser.add_argument(
        "--storage.provider",
        type=str,
        choices=["s3", "r2"],
        default=os.getenv("PHASE2_STORAGE_PROVIDER", "s3"),
        help="Object storage provider.",
    )
    parser.add_argument(
        "--storage.bucket",
        type=str,
        default=os.getenv("PHASE2_STORAGE_BUCKET", ""),
        help="Bucket holding the ceremony artifacts.",
    )
    parser.add_argument(
        "--storage.region",
        type=str,
        default=os.getenv("PHASE2_STORAGE_REGION", "us-east-1"),
        help="Bucket region (S3 only).",
    )
    parser.add_argument(
        "--storage.account_id",
        type=str,
        default=os.getenv("PHASE2_STORAGE_ACCOUNT_ID", ""),
        help="Cloudflare account ID (R2 only).",
    )

    bt.logging.add_args(parser)
    bt.wallet.add_args(parser)

    config = bt.config(parser, args=args, strict=True)

    if SHOW_HELP:
        # --help or -h flag was passed, show the help message and exit
        parser.print_help()
        sys.exit(0)

    config.working_dir = os.path.abspath(os.path.expanduser(config.working_dir))
    if config.output_dir:
        config.output_dir = os.path.abspath(os.path.expanduser(config.output_dir))
    if config.pot_cache_dir:
        config.pot_cache_dir = os.path.abspath(os.path.expanduser(config.pot_cache_dir))

    bt.logging(config=config, logging_dir=config.logging.logging_dir)
    if not (config.logging.debug or config.logging.trace):
        bt.logging.enable_info()

    if not config.registration_url:
        bt.logging.warning(
            "No registration URL configured, use --registration-url or PHASE2_REGISTRATION_URL."
        )


def storage_config(cfg) -> dict:
    """
    Storage settings for `CeremonyStorage`. Credentials come from the environment only.
    """
    return {
        "provider": cfg.storage.provider,
        "bucket": cfg.storage.bucket,
        "region": cfg.storage.region,
        "account_id": cfg.storage.account_id,
        "access_key": os.getenv(STORAGE_ACCESS_KEY_ENV),
        "secret_key": os.getenv(STORAGE_SECRET_KEY_ENV),
    }
