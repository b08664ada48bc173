from timesheet_invoice.cli.app import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
