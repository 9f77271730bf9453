"""Server-side relay between the design-tool rotation plugin and Replicate.

The plugin cannot hold the Replicate API key, so it talks to this service
instead: `/predictions` calls are forwarded with the key injected, and
`/validate-reset-key` answers credit-reset lookups from a fixed table.
"""

__version__ = "0.1.0"
