# pdsync/run.py
# Entry point: `pipedrive-sync` or `python -m pdsync.run`.
# - Loads settings (.env) and both JSON artifacts
# - Optionally upserts the organization, then upserts the person
# - Prints the resulting Pipedrive person as JSON
# Exit code 0 on success, 1 on any SyncError (already logged).

import json
import sys
from typing import Optional

from pdsync.config import Settings, load_settings
from pdsync.errors import PipedriveError, SyncError
from pdsync.integrations.pipedrive import PipedriveClient, PipedrivePerson
from pdsync.logging_setup import configure_logging, get_logger
from pdsync.mapping import load_input_document, load_mapping_rules
from pdsync.sync import resolve_search_name, sync_organization, sync_person


def run_sync(settings: Settings, client: Optional[PipedriveClient] = None) -> PipedrivePerson:
    document = load_input_document(settings.INPUT_DATA_PATH)
    person_rules = load_mapping_rules(settings.MAPPINGS_PATH)
    org_rules = (
        load_mapping_rules(settings.ORGANIZATION_MAPPINGS_PATH)
        if settings.ORGANIZATION_MAPPINGS_PATH
        else None
    )
    # both name lookups are config checks; fail before the first request
    resolve_search_name(person_rules, document)
    if org_rules is not None:
        resolve_search_name(org_rules, document)

    client = client or PipedriveClient.from_settings(settings)

    extra_fields = {}
    if org_rules is not None:
        org = sync_organization(client, org_rules, document)
        extra_fields["org_id"] = org.id

    return sync_person(client, person_rules, document, extra_fields)


def main() -> int:
    try:
        settings = load_settings()
    except SyncError as e:
        configure_logging()
        get_logger().error("sync_failed", stage="config", error=str(e))
        return 1

    configure_logging(settings.LOG_LEVEL, settings.SERVICE_NAME)
    log = get_logger()
    try:
        person = run_sync(settings)
    except PipedriveError as e:
        log.error(
            "sync_failed",
            stage="pipedrive",
            error=str(e),
            category=getattr(e, "category", "envelope"),
            status=e.status_code,
        )
        return 1
    except SyncError as e:
        log.error("sync_failed", stage="config", error=str(e))
        return 1

    print(json.dumps(person.model_dump(), indent=2, ensure_ascii=False, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
