"""
Scripts Module

One-shot maintenance commands run against the Supabase project:
- cleanup_storage: clear proof files of old payments
- prune_bucket: prune old files from a bucket folder
- seed_audit_rules: derive expense audit rules from history
"""
