"""
检查点模型单元测试
"""
from datetime import datetime

import pytest

from draftless.domain.models.checkpoint import CheckpointModel, HistoryHead
from tests.factories import TestDataBuilder


@pytest.mark.unit
class TestCheckpointModels:
    """检查点模型测试"""

    def test_model_to_pydantic(self):
        created = datetime(2024, 5, 1, 12, 0, 0)
        model = CheckpointModel(
            id="cp-1",
            document_id="doc-1",
            label="First",
            content=TestDataBuilder.simple_doc("a"),
            parent_id=None,
            created_at=created,
        )

        checkpoint = model.to_pydantic()

        assert checkpoint.id == "cp-1"
        assert checkpoint.label == "First"
        assert checkpoint.parent_id is None
        assert checkpoint.created_at == created
        assert checkpoint.content == TestDataBuilder.simple_doc("a")

    def test_history_head_moves_and_clears(self):
        head = HistoryHead("doc-1")
        assert head.current_checkpoint_id is None

        head.move_to("cp-1")
        assert head.current_checkpoint_id == "cp-1"

        head.clear()
        assert head.current_checkpoint_id is None
