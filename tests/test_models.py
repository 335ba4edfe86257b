import pytest
from pydantic import ValidationError

from server.models import TaskRecord, ChatRequest, ChatResponse


def test_task_record_stores_fields():
    t = TaskRecord(task="Write report", difficulty="hard", rating="5")
    assert t.task == "Write report"
    assert t.difficulty == "hard"
    assert t.rating == "5"


def test_chat_request_defaults_to_empty_tasks():
    req = ChatRequest(message="hi")
    assert req.message == "hi"
    assert req.tasks == []


def test_chat_request_message_is_optional():
    req = ChatRequest()
    assert req.message is None


def test_chat_request_null_tasks_become_empty_list():
    req = ChatRequest.model_validate({"message": "hi", "tasks": None})
    assert req.tasks == []


def test_chat_request_parses_task_dicts():
    req = ChatRequest.model_validate({
        "message": "hi",
        "tasks": [{"task": "a", "difficulty": "easy", "rating": "3"}],
    })
    assert len(req.tasks) == 1
    assert req.tasks[0].task == "a"


def test_chat_request_rejects_non_list_tasks():
    with pytest.raises(ValidationError):
        ChatRequest.model_validate({"message": "hi", "tasks": "nope"})


def test_chat_response_stores_reply():
    r = ChatResponse(reply="hello back")
    assert r.reply == "hello back"


def test_task_record_keeps_extra_keys():
    t = TaskRecord.model_validate({"task": "a", "id": "7"})
    assert t.model_dump(exclude_unset=True) == {"task": "a", "id": "7"}
