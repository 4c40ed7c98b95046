# CASHBOOK/backend/scripts/session_cli.py : session en ligne de commande

#!/usr/bin/env python
"""Connexion, déconnexion et identité courante via le cache de session"""

import argparse
import getpass
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cashbook.session import IdentitySession, AuthenticationError

def main(argv=None):
    parser = argparse.ArgumentParser(description="Session Cashbook")
    subparsers = parser.add_subparsers(dest="command", required=True)
    login_parser = subparsers.add_parser("login", help="Se connecter")
    login_parser.add_argument("phone")
    subparsers.add_parser("logout", help="Se déconnecter")
    subparsers.add_parser("whoami", help="Afficher l'utilisateur connecté")
    args = parser.parse_args(argv)

    session = IdentitySession()

    if args.command == "login":
        try:
            user = session.login(args.phone, getpass.getpass("Mot de passe: "))
        except AuthenticationError as e:
            print(f"❌ {e}")
            return 1
        print(f"✅ Connecté en tant que {user.full_name} ({user.role.value})")
        return 0

    if args.command == "logout":
        session.logout()
        print("👋 Déconnecté")
        return 0

    user = session.restore()
    if user is None:
        print("Aucune session active")
        return 1
    mode = "" if session.is_online else " [hors ligne]"
    print(f"{user.full_name} - {user.phone} ({user.role.value}){mode}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
