#!/usr/bin/env python3
"""
Validate the Airwallex configuration of the payment proxy.

Reads the same environment / .env the service does and performs one login.
"""

import asyncio
import sys

from payment_proxy.config import settings
from payment_proxy.probe import validate_environment

if __name__ == "__main__":
    exit_code = asyncio.run(validate_environment(settings))
    sys.exit(exit_code)
