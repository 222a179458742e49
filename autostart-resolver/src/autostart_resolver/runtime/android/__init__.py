"""Android runtime helpers for autostart-resolver.

This package contains *thin* wrappers around adb so that the resolver can
stay a pure decision over injected collaborators:
  * identity: read the device vendor
  * probe: ask the package manager whether a component resolves
  * dispatcher: issue ``am start`` and surface failures as exceptions
"""
