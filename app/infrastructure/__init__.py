"""Infrastructure modules for the messaging core.

Centralized infrastructure components:
- configuration: Settings management (Settings and per-concern settings)
- logging: Structured logging setup and request context
- operations: Operation results and the classified error taxonomy
- resilience: Rate limiting, retry with backoff, circuit breakers, clock
- notifications: Preference gate, in-app store, channel senders, dispatcher
- services: Dependency injection providers (get_settings, SettingsDep, ...)

Subpackages are imported explicitly by consumers; nothing is re-exported
here so importing one component never drags in the others.
"""
