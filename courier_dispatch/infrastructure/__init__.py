"""Infrastructure adapters: persistence, mailbox storage and realtime push."""
