# scripts/pd_check.py
# Sanity check your Pipedrive token and company domain before running the sync
import sys

from pdsync.config import load_settings
from pdsync.errors import ConfigurationError, PipedriveError
from pdsync.integrations.pipedrive import PipedriveClient


def main():
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print("❌", e)
        sys.exit(1)

    client = PipedriveClient.from_settings(settings)
    try:
        me = client.get_current_user()
    except PipedriveError as e:
        print("Status:", e.status_code)
        print("❌ Token check failed:", e)
        sys.exit(2)

    print("✅ Token OK for:", me.get("name"), "| email:", me.get("email"))
    print("Company domain:", me.get("company_domain"))


if __name__ == "__main__":
    main()
