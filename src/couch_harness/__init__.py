"""couch-harness — integration-test build orchestrator.

Starts a CouchDB/Cloudant container, runs the Gradle wrapper against it,
and tears the container down again, propagating the build's exit code.
"""

from couch_harness.version import __version__

__all__: list[str] = ["__version__"]
