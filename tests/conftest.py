"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from diffscribe.config import LLMProvider, get_language_profile
from diffscribe.llm.base import BaseLLMProvider


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_repo_root(temp_dir):
    """Create a mock git repository root directory."""
    # Create .git directory to simulate a git repo
    git_dir = temp_dir / ".git"
    git_dir.mkdir()
    return temp_dir


@pytest.fixture
def korean():
    return get_language_profile("ko")


@pytest.fixture
def english():
    return get_language_profile("en")


@pytest.fixture
def service_diff():
    """Diff adding one public method and one import to Service.x."""
    return """diff --git a/src/Service.x b/src/Service.x
index 1234567..abcdefg 100644
--- a/src/Service.x
+++ b/src/Service.x
@@ -1,6 +1,10 @@
 package demo;
+import "net/http";
 
 public class Service {
+    public void handleRequest() {
+        return;
+    }
 }
"""


@pytest.fixture
def tool_config_diff():
    """Diff adding a Bean-producing configuration method with annotations."""
    return """diff --git a/src/main/java/demo/mcp/ToolConfig.java b/src/main/java/demo/mcp/ToolConfig.java
index 1111111..2222222 100644
--- a/src/main/java/demo/mcp/ToolConfig.java
+++ b/src/main/java/demo/mcp/ToolConfig.java
@@ -1,8 +1,16 @@
 package demo.mcp;
 
 @Configuration
 public class ToolConfig {
+
+    @Bean
+    public ToolCallbackProvider weatherTools(ApplicationContext context) {
+        return toolProvider;
+    }
 }
"""


@pytest.fixture
def context_only_diff():
    """Diff with headers and context lines but no +/- change lines."""
    return """diff --git a/README.md b/README.md
index 1234567..1234567 100644
--- a/README.md
+++ b/README.md
@@ -1,3 +1,3 @@
 # Title
 
 Some text
"""


class FakeProvider(BaseLLMProvider):
    """In-memory provider returning canned replies (or raising canned errors)."""

    provider = LLMProvider.OLLAMA

    def __init__(self, replies=None, model="fake-model"):
        self.model = model
        self.replies = list(replies or [])
        self.prompts = []

    def get_api_key(self) -> str:
        return ""

    def call(self, prompt):
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def fake_provider_factory():
    """Build a FakeProvider with the given replies."""
    return FakeProvider


@pytest.fixture
def mock_runner():
    """A GitRunner stand-in; configure run_capture/run per test."""
    runner = MagicMock()
    runner.run_capture.return_value = ""
    runner.run.return_value = 0
    return runner
