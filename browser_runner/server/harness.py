"""Harness page and in-page bootstrap script.

The harness page loads the test framework, the bootstrap script, helpers,
source files and spec files in that order. The bootstrap defers execution
until the host calls ``browserRunner.start(config)``, then queues every
reporter event so the host can fetch them in batches. When ``config.jsonDom``
is set, for browsers that cannot return structured values from scripts,
events are published as JSON text in a DOM node instead.
"""

import html
from typing import Iterable

FRAMEWORK_PREFIX = "/__framework__/"
SRC_PREFIX = "/__src__/"
SPEC_PREFIX = "/__spec__/"
BOOTSTRAP_PATH = "/__browser_runner__/bootstrap.js"
EVENTS_NODE_ID = "browser-runner-events"

BOOTSTRAP_JS = r"""
(function() {
  var env = jasmine.getEnv();
  var queue = [];
  var node = null;
  var jsonDom = false;

  function eventsNode() {
    if (!node) {
      node = document.getElementById('%(events_node)s');
    }
    return node;
  }

  function publish(type, payload) {
    var event = { type: type, payload: JSON.parse(JSON.stringify(payload)) };
    if (!jsonDom) {
      queue.push(event);
      return;
    }
    var el = eventsNode();
    var pending = JSON.parse(el.textContent || '[]');
    pending.push(event);
    el.textContent = JSON.stringify(pending);
  }

  var reporter = {};
  ['jasmineStarted', 'suiteStarted', 'specStarted', 'specDone', 'suiteDone',
   'jasmineDone'].forEach(function(name) {
    reporter[name] = function(result) { publish(name, result); };
  });

  window.browserRunner = {
    start: function(config) {
      config = config || {};
      jsonDom = !!config.jsonDom;
      var envConfig = config.env || {};
      if (config.filter) {
        var pattern = new RegExp(config.filter);
        envConfig.specFilter = function(spec) {
          return pattern.test(spec.getFullName());
        };
      }
      env.configure(envConfig);
      if (config.clearReporters) {
        env.clearReporters();
      }
      env.addReporter(reporter);
      env.execute();
      return true;
    },
    takeBatch: function() {
      var batch = queue;
      queue = [];
      return batch;
    },
    takeJson: function() {
      var el = eventsNode();
      var text = el ? el.textContent : '[]';
      if (el) {
        el.textContent = '[]';
      }
      return text || '[]';
    }
  };
})();
""" % {"events_node": EVENTS_NODE_ID}


def _script_tags(urls: Iterable[str]) -> str:
    return "\n".join(
        f'    <script src="{html.escape(url, quote=True)}"></script>' for url in urls
    )


def _style_tags(urls: Iterable[str]) -> str:
    return "\n".join(
        f'    <link rel="stylesheet" href="{html.escape(url, quote=True)}">' for url in urls
    )


def render_harness_page(
    framework_styles: list[str],
    framework_scripts: list[str],
    helper_urls: list[str],
    src_urls: list[str],
    spec_urls: list[str],
) -> str:
    """Render the page the browser navigates to.

    Args:
        framework_styles: Stylesheet URLs of the test framework.
        framework_scripts: Script URLs of the test framework.
        helper_urls: Spec helper script URLs.
        src_urls: Source script URLs.
        spec_urls: Spec script URLs.

    Returns:
        The HTML document.
    """
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>browser-runner</title>
{_style_tags(framework_styles)}
{_script_tags(framework_scripts)}
{_script_tags([BOOTSTRAP_PATH])}
{_script_tags(helper_urls)}
{_script_tags(src_urls)}
{_script_tags(spec_urls)}
  </head>
  <body>
    <script type="application/json" id="{EVENTS_NODE_ID}">[]</script>
  </body>
</html>
"""
