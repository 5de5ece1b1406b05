"""eventrelay routing — the dispatch loop and its collaborator protocols.

A ``Dispatcher`` reads events from an ``EventSource`` and fans each payload
out to the event's recipients through a ``DeliverySink``.  Sources and sinks
are pluggable: anything implementing the protocols in ``routing.sources``
and ``routing.sinks`` can be substituted without touching the dispatcher.
"""
