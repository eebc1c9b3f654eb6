"""
Pytest configuration and shared fixtures for gcpeasy tests

Collectors are replaced by scripted fakes: captured commands answer from a
table keyed by their argument list, interactive and streamed commands
return scripted exit codes. Nothing here starts a real gcloud or kubectl.
"""

import io
import json
import logging

import pytest
from rich.console import Console

from gcpeasy.collectors.gcloud import ACTIVE_ACCOUNT_ARGS, GcloudCollector
from gcpeasy.collectors.kubectl import PHASE_COLUMNS, KubectlCollector
from gcpeasy.config import Config
from gcpeasy.selection import NumberedMenu

CURRENT_PROJECT_ARGS = ("config", "get-value", "project")
PROJECTS_ARGS = ("projects", "list", "--format=json")
CURRENT_CONTEXT_ARGS = ("config", "current-context")
PHASE_ARGS = ("get", "pods", "--all-namespaces", "-o", PHASE_COLUMNS, "--no-headers")
WIDE_ARGS = ("get", "pods", "--all-namespaces", "-o", "wide", "--no-headers")

PROJECTS_JSON = json.dumps([
    {"projectId": "my-project", "name": "My Project", "projectNumber": "1234"},
    {"projectId": "other-project", "name": "Other"},
])

CLUSTERS_OUTPUT = "prod      us-central1\nstaging   us-east1-b\n"

PHASE_OUTPUT = """\
default       web-1        Running
default       web-2        Running
kube-system   kube-dns-1   Running
batch         job-1        Succeeded
"""

WIDE_OUTPUT = """\
default       web-1        1/1   Running            0            2d    10.0.0.1   node-a   <none>   <none>
kube-system   kube-dns-1   1/1   Running            0            9d    10.0.0.9   node-b   <none>   <none>
default       web-2        0/1   CrashLoopBackOff   5 (2m ago)   1h    10.0.0.2   node-a   <none>   <none>
batch         job-1        0/1   Completed          0            3h    10.0.0.3   node-c   <none>   <none>
"""


def clusters_args(project_id):
    return (
        "container", "clusters", "list",
        "--project", project_id,
        "--format=value(name,location)",
    )


class ScriptedCollectorMixin:
    """Replaces process execution with scripted answers

    Unscripted captured commands succeed with empty output; scripted
    answers that are exceptions are raised.
    """

    def __init__(self, *args, installed=True, **kwargs):
        super().__init__(*args, **kwargs)
        if installed:
            self._path = f"/usr/bin/{self.name}"
        else:
            self.executable = f"no-such-{self.name}-binary"
        self.responses = {}
        self.exit_codes = {}
        self.stream_codes = {}
        self.calls = []
        self.interactive_calls = []
        self.streamed = []

    def respond(self, args, output):
        self.responses[tuple(args)] = output

    async def run(self, args, check=True):
        self.ensure_installed()
        self.calls.append(list(args))
        output = self.responses.get(tuple(args), "")
        if isinstance(output, Exception):
            raise output
        return output

    async def run_interactive(self, args):
        self.ensure_installed()
        self.interactive_calls.append(list(args))
        return self.exit_codes.get(tuple(args), 0)

    async def stream(self, args, line_filter=None, out=None):
        self.ensure_installed()
        self.streamed.append((list(args), line_filter))
        return self.stream_codes.get(tuple(args), 0)


class FakeGcloud(ScriptedCollectorMixin, GcloudCollector):
    pass


class FakeKubectl(ScriptedCollectorMixin, KubectlCollector):
    pass


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo root logger changes made by configure_logging"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    logging.disable(logging.NOTSET)
    root.handlers = handlers
    root.setLevel(level)


def output_of(console):
    """Everything printed to a StringIO-backed console"""
    return console.file.getvalue()


@pytest.fixture
def gcloud():
    """Authenticated gcloud with two projects and two clusters in my-project"""
    fake = FakeGcloud()
    fake.respond(ACTIVE_ACCOUNT_ARGS, "dev@example.com\n")
    fake.respond(CURRENT_PROJECT_ARGS, "my-project\n")
    fake.respond(PROJECTS_ARGS, PROJECTS_JSON)
    fake.respond(clusters_args("my-project"), CLUSTERS_OUTPUT)
    return fake


@pytest.fixture
def kubectl():
    """kubectl with no current context and a mix of pods"""
    fake = FakeKubectl()
    fake.respond(PHASE_ARGS, PHASE_OUTPUT)
    fake.respond(WIDE_ARGS, WIDE_OUTPUT)
    return fake


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, highlight=False)


@pytest.fixture
def data_console():
    return Console(file=io.StringIO(), width=200, highlight=False)


def scripted_menu(console, answers):
    """Menu reading from a list of answers; EOF once they run out"""
    remaining = list(answers)

    def read(prompt):
        if not remaining:
            raise EOFError()
        return remaining.pop(0)

    return NumberedMenu(console, input_func=read)


@pytest.fixture
def make_command(gcloud, kubectl, console):
    """Build a command wired to the fakes and the StringIO console"""

    def _make(cls, answers=(), **kwargs):
        return cls(
            config=Config(environ={}),
            gcloud=gcloud,
            kubectl=kubectl,
            console=console,
            error_console=console,
            menu=scripted_menu(console, answers),
            **kwargs,
        )

    return _make
