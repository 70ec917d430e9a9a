from session_logger.cli import main

main()
