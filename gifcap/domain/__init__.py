"""
This package contains the core domain models of gifcap.

Modules:
    exceptions.py: Custom exception types, one per fatal failure of the
                   capture pipeline.
    capture.py: `CaptureConfig`, the explicit configuration threaded through
                the run, and `CancellationToken`, which turns a user interrupt
                into a clean stop of the recording.
    temp_models.py: `WorkingDirectory`, the scoped temporary directory, and
                    `better_mktemp`, which names temporary artifacts so their
                    extension is preserved.
"""
