"""Shared catalog fixtures for completion tests."""

from __future__ import annotations

import pytest

from sqlsense.sql_completion import (
    CatalogIndex,
    CompletionEngine,
    CompletionRequest,
    IntellisenseConfig,
    Schema,
    Table,
    WorkflowVariable,
)


@pytest.fixture
def config():
    """Catalog with two schemas and a few workflow variables."""
    return IntellisenseConfig(
        database_type="oracle",
        schemas=[
            Schema(
                "HR",
                (
                    Table("EMP", ("ID", "NAME")),
                    Table("DEPT", ("DEPT_ID", "DNAME")),
                ),
            ),
            Schema("SALES", (Table("ORDERS", ("ORDER_ID", "EMP_ID", "TOTAL")),)),
        ],
        workflow_variables=[
            WorkflowVariable("SCOPE", "beta"),
            WorkflowVariable("SCOPE", "alpha"),
            WorkflowVariable("SCOPE", "alpha"),
            WorkflowVariable("env", "HOST"),
            WorkflowVariable("", "orphan"),
            WorkflowVariable("env", "  "),
        ],
    )


@pytest.fixture
def index(config):
    return CatalogIndex.build(config.schemas, config.workflow_variables)


@pytest.fixture
def engine(config):
    return CompletionEngine(config)


@pytest.fixture
def complete(engine):
    """Run the engine and return candidate labels."""

    def _complete(text: str, prefix: str = "", after: str = "") -> list[str]:
        request = CompletionRequest(text_before_cursor=text, word_prefix=prefix, text_after_cursor=after)
        return [c.label for c in engine.complete(request)]

    return _complete
