from harvest_mcp.server import main

main()
