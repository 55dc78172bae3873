from conversation_cli.mcp_server import main

main()
