from .form import ApplicationFormRequest, FormField
from .job import Job, JobDraft
from .provisioning import ProvisioningOutcome, ProvisionRequest
from .tally import Block, FormSubmission

__all__ = [
    "ApplicationFormRequest",
    "FormField",
    "Job",
    "JobDraft",
    "ProvisioningOutcome",
    "ProvisionRequest",
    "Block",
    "FormSubmission",
]
