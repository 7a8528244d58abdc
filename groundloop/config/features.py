"""Feature flags for groundloop.

Deployment sequence:
1. DEMON only (reweighting toward the reference, no learning)
2. LEARNING (experiences recorded, bias adapted)
"""

# Demon: reweight every superposition toward the reference before collapse
FEATURE_DEMON_ENABLED = True

# Learning: record experiences and periodically replay them
FEATURE_LEARNING_ENABLED = True
