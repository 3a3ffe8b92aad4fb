"""Runtime: periodic emitters and the sidecar orchestrator."""
