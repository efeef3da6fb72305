import pytest
from pydantic import ValidationError

from gopathlink.io.requests_input import (
    order_requests,
    parse_request_arg,
    parse_request_line,
    read_requests,
)
from gopathlink.model.request import ModuleRequest

GO_OUTPUT = """\
go: finding module for package k8s.io/api/core/v1
go: downloading k8s.io/api v0.20.0
go: extracting k8s.io/api v0.20.0
go: extracting github.com/docker/docker v17.12.0-ce-rc1.0.20200531234253-77e06fda0c94+incompatible
go: found k8s.io/api/core/v1 in k8s.io/api v0.20.0
"""


@pytest.mark.short
@pytest.mark.parametrize(
    "line, path, version",
    [
        ("go: extracting k8s.io/api v0.20.0", "k8s.io/api", "v0.20.0"),
        ("go: downloading golang.org/x/net v0.0.0-20200822124328-c89045814202",
         "golang.org/x/net", "v0.0.0-20200822124328-c89045814202"),
        ("go: extracting k8s.io/api: v0.20.0", "k8s.io/api", "v0.20.0"),
        ("go: extracting github.com/pkg/errors", "github.com/pkg/errors", "master"),
        ("go: extracting github.com/x/y v1.0.0+incompatible", "github.com/x/y", "v1.0.0"),
    ],
)
def test_parse_request_line(line, path, version):
    request = parse_request_line(line)
    assert request == ModuleRequest(path=path, version=version)


@pytest.mark.short
@pytest.mark.parametrize(
    "line",
    [
        "go: finding module for package k8s.io/api/core/v1",
        "go: found k8s.io/api/core/v1 in k8s.io/api v0.20.0",
        "",
        "build ok",
    ],
)
def test_other_lines_ignored(line):
    assert parse_request_line(line) is None


@pytest.mark.short
def test_read_requests_echoes_every_line():
    echoed = []

    requests = list(read_requests(GO_OUTPUT.splitlines(keepends=True), echo=echoed.append))

    assert echoed == GO_OUTPUT.splitlines()
    assert [str(r) for r in requests] == [
        "k8s.io/api@v0.20.0",
        "k8s.io/api@v0.20.0",
        "github.com/docker/docker@v17.12.0-ce-rc1.0.20200531234253-77e06fda0c94",
    ]


@pytest.mark.short
def test_read_requests_is_lazy():
    consumed = []

    def lines():
        for line in ["go: extracting a.com/b v1.0.0", "go: extracting c.com/d v2.0.0"]:
            consumed.append(line)
            yield line

    stream = read_requests(lines())
    first = next(stream)

    assert first.path == "a.com/b"
    assert len(consumed) == 1


@pytest.mark.short
def test_parse_request_arg():
    assert parse_request_arg("k8s.io/api@v0.20.0") == ModuleRequest(
        path="k8s.io/api", version="v0.20.0"
    )
    assert parse_request_arg("k8s.io/api").version == "master"
    with pytest.raises(ValidationError):
        parse_request_arg("@v1.0.0")


@pytest.mark.short
def test_order_requests_deeper_first():
    requests = [
        ModuleRequest(path="cloud.google.com/go", version="v0.60.0"),
        ModuleRequest(path="cloud.google.com/go/storage", version="v1.2.3"),
        ModuleRequest(path="k8s.io/api", version="v0.20.0"),
        ModuleRequest(path="cloud.google.com/go/bigquery", version="v3.2.1"),
    ]

    ordered = [r.path for r in order_requests(requests)]

    assert ordered == [
        "cloud.google.com/go/bigquery",
        "cloud.google.com/go/storage",
        "cloud.google.com/go",
        "k8s.io/api",
    ]
