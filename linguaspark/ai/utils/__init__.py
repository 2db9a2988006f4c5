"""Text helpers shared by the context builder, generators and validators."""
