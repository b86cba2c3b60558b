"""Test suite for promptstudio.

- unit/: Unit tests mirroring the package layout; vendor endpoints are faked
  with httpx.MockTransport, so no test touches the network.
"""
