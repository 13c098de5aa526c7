from deploy_mailgun.cli import main

raise SystemExit(main())
