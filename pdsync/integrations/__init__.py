"""
CRM integrations used by the sync runner.
Only Pipedrive for now; each client raises pdsync.errors types on failure.
"""

from .pipedrive import PipedriveClient, PipedriveOrganization, PipedrivePerson

__all__ = ["PipedriveClient", "PipedrivePerson", "PipedriveOrganization"]
