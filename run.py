#!/usr/bin/env python3
"""
Run one Azure Stack sample end-to-end.

Usage:
  python run.py resourcegroup
  python run.py storage --config ../azureAppSpConfig.json
  python run.py secret
"""
import argparse
import os
import sys

# Ensure src is importable
sys.path.insert(0, os.path.dirname(__file__))

# Load .env before anything else
from dotenv import load_dotenv
load_dotenv(override=False)  # override=False: real env vars take precedence

from src.main import SAMPLES, configure_logging, main


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Azure Stack resource samples")
    parser.add_argument("sample", choices=sorted(SAMPLES),
                        help="Sample to run")
    parser.add_argument("--config", metavar="PATH",
                        help="Service-principal JSON file "
                             "(default: $AZURE_SP_CONFIG_FILE or azureAppSpConfig.json)")
    args = parser.parse_args()

    configure_logging()
    main(args.sample, config_path=args.config)
