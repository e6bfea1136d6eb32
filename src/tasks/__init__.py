from .vote_on_ruby import VoteOnRubyModule
