"""Users domain - persisted user profiles"""
