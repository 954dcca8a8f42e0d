"""Tests for the in-page bootstrap script, run under Node with a stubbed page."""

import json
import shutil
import subprocess

import pytest

from browser_runner.server.harness import BOOTSTRAP_JS, EVENTS_NODE_ID

pytestmark = pytest.mark.skipif(shutil.which("node") is None, reason="node is not installed")

SPEC_COUNT = 200

PAGE_STUB = """
globalThis.window = globalThis;
var eventsNode = { textContent: '[]' };
globalThis.document = {
  getElementById: function(id) { return id === EVENTS_NODE_ID ? eventsNode : null; }
};
var reporters = [];
globalThis.jasmine = {
  getEnv: function() {
    return {
      configure: function() {},
      clearReporters: function() { reporters = []; },
      addReporter: function(r) { reporters.push(r); },
      execute: function() {}
    };
  }
};
"""

DRIVER = """
window.browserRunner.start(CONFIG);
var drained = [];
for (var i = 0; i < SPEC_COUNT; i++) {
  reporters[0].specDone({ fullName: 'spec ' + i, status: 'passed' });
  var taken = CONFIG.jsonDom
    ? JSON.parse(window.browserRunner.takeJson())
    : window.browserRunner.takeBatch();
  drained = drained.concat(taken);
}
console.log(JSON.stringify({
  drained: drained.length,
  first: drained[0],
  queued: window.browserRunner.takeBatch().length,
  domEvents: JSON.parse(eventsNode.textContent).length
}));
"""


def run_bootstrap(tmp_path, config):
    script = "\n".join([
        f"var EVENTS_NODE_ID = {json.dumps(EVENTS_NODE_ID)};",
        f"var CONFIG = {json.dumps(config)};",
        f"var SPEC_COUNT = {SPEC_COUNT};",
        PAGE_STUB,
        BOOTSTRAP_JS,
        DRIVER,
    ])
    path = tmp_path / "bootstrap_run.js"
    path.write_text(script, encoding="utf-8")

    completed = subprocess.run(
        ["node", str(path)], capture_output=True, text=True, check=True, timeout=30,
    )
    return json.loads(completed.stdout)


def test_batch_transport_drains_and_leaves_dom_node_empty(tmp_path):
    outcome = run_bootstrap(tmp_path, {"env": {}, "jsonDom": False})

    assert outcome["drained"] == SPEC_COUNT
    assert outcome["first"] == {"type": "specDone",
                                "payload": {"fullName": "spec 0", "status": "passed"}}
    assert outcome["queued"] == 0
    assert outcome["domEvents"] == 0


def test_json_dom_transport_drains_and_leaves_queue_empty(tmp_path):
    outcome = run_bootstrap(tmp_path, {"env": {}, "jsonDom": True})

    assert outcome["drained"] == SPEC_COUNT
    assert outcome["first"]["payload"]["fullName"] == "spec 0"
    assert outcome["queued"] == 0
    assert outcome["domEvents"] == 0
