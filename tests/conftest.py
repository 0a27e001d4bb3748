from unittest.mock import MagicMock

import pytest

from campaigns import Campaign
from fakes import RESUME_TEXT, make_responder
from hiring_models import ResumeDocument


@pytest.fixture
def completion_client():
    client = MagicMock()
    client.complete.side_effect = make_responder()
    return client


@pytest.fixture
def campaign():
    return Campaign(
        id="data-eng",
        name="Data Engineering",
        jd_folder_id="jd-folder",
        resumes_folder_id="resume-folder",
    )


@pytest.fixture
def resume_document():
    return ResumeDocument(
        id="file-1",
        name="asha_rao.pdf",
        text=RESUME_TEXT,
        content_hash="hash-asha",
        file_link="https://drive.google.com/file/d/file-1/view",
        mime_type="application/pdf",
    )
