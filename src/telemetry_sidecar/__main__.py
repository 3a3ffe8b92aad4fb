from telemetry_sidecar.cli import main

main()
