"""Lightbar and armor plate detection on BGR images."""